import os
import re
import tkinter as tk
from tkinter import ttk, filedialog, messagebox
import threading
from typing import List, Optional

from ..core.engine import SizeEngine
from ..core.errors import SizeSpecError
from ..core.io_utils import gather_inputs, list_images
from ..core.models import ResizeOptions, ResizeResult
from ..core.resize_service import probe_dimension, resize_many, with_function

SCALING_CHOICES = ["contain", "cover", "exact"]


def parse_sizes_field(text: str) -> List[str]:
    """Split the sizes entry ("320, 50%; 200X100") into size objects."""
    return [s.strip() for s in re.split(r"[,;\n]", text or "") if s.strip()]


class _TextLog:
    """Routes engine warnings and errors into the preview box."""
    def __init__(self, append):
        self._append = append

    def warning(self, msg: str):
        self._append(f"[Warning] {msg}")

    def error(self, msg: str):
        self._append(f"[Error] {msg}")


class ImageResizerGUI:
    def __init__(self, root: tk.Tk):
        self.root = root
        self.root.title("Responsive Image Resizer")
        self.root.geometry("760x520")
        self.engine = SizeEngine(log=_TextLog(self._append))

        # UI state
        self.files: List[str] = []
        self.folder: Optional[str] = None
        self.output_folder: Optional[str] = None

        self.sizes = tk.StringVar(value="320, 50%, 1024X768")
        self.function = tk.StringVar(value="contain")
        self.name_template = tk.StringVar(value="{name}-w{width}")

        self.format_choice = tk.StringVar(value="keep")  # keep | jpg | png | webp
        self.jpg_quality = tk.IntVar(value=85)
        self.overwrite = tk.BooleanVar(value=False)

        self.status = tk.StringVar(value="Select files or a folder to begin")
        self._build_ui()

    # ---------- UI ----------
    def _build_ui(self):
        top = tk.Frame(self.root); top.pack(fill="x", padx=10, pady=(10,6))
        tk.Label(top, text="Input:").pack(side="left")
        tk.Button(top, text="Choose Files", command=self.choose_files).pack(side="left", padx=5)
        tk.Button(top, text="Choose Folder", command=self.choose_folder).pack(side="left", padx=5)
        self.input_label = tk.Label(top, text="No files selected", anchor="w"); self.input_label.pack(side="left", padx=10)

        out = tk.Frame(self.root); out.pack(fill="x", padx=10, pady=(0,8))
        tk.Label(out, text="Output folder:").pack(side="left")
        tk.Button(out, text="Select", command=self.choose_output).pack(side="left", padx=5)
        self.output_label = tk.Label(out, text="default: creates 'output' next to source", anchor="w"); self.output_label.pack(side="left", padx=10)

        opts = tk.LabelFrame(self.root, text="Sizes"); opts.pack(fill="x", padx=10, pady=10)
        row = tk.Frame(opts); row.pack(fill="x", pady=4)
        tk.Label(row, text="Sizes (320, 0.5x, 50%, 200X100):").pack(side="left")
        tk.Entry(row, textvariable=self.sizes, width=30).pack(side="left", padx=(6,10), fill="x", expand=True)
        tk.Label(row, text="Scaling:").pack(side="left")
        ttk.Combobox(row, textvariable=self.function, values=SCALING_CHOICES, state="readonly", width=8).pack(side="left", padx=(4,0))

        fmt = tk.LabelFrame(self.root, text="Format & Naming"); fmt.pack(fill="x", padx=10, pady=6)
        fr1 = tk.Frame(fmt); fr1.pack(fill="x", pady=4)
        tk.Label(fr1, text="Output format:").pack(side="left")
        ttk.Combobox(fr1, textvariable=self.format_choice, values=["keep","jpg","png","webp"], state="readonly", width=7).pack(side="left", padx=(6,10))
        tk.Label(fr1, text="JPEG quality:").pack(side="left")
        self.q_scale = ttk.Scale(fr1, from_=50, to=100, orient="horizontal", command=self._sync_quality_label)
        self.q_scale.set(self.jpg_quality.get()); self.q_scale.pack(side="left", fill="x", expand=True, padx=(6,6))
        self.q_label = tk.Label(fr1, text=str(self.jpg_quality.get())); self.q_label.pack(side="left")

        fr2 = tk.Frame(fmt); fr2.pack(fill="x", pady=2)
        tk.Label(fr2, text="Name template:").pack(side="left")
        tk.Entry(fr2, textvariable=self.name_template, width=24).pack(side="left", padx=(6,10))
        tk.Checkbutton(fr2, text="Overwrite existing files", variable=self.overwrite).pack(side="left")

        actions = tk.Frame(self.root); actions.pack(fill="x", padx=10, pady=(4,6))
        tk.Button(actions, text="Preview", command=self.preview).pack(side="left")
        tk.Button(actions, text="Resize Images", command=self.run).pack(side="left", padx=8)

        self.progress = ttk.Progressbar(self.root, mode="determinate"); self.progress.pack(fill="x", padx=10, pady=(2,4))
        tk.Label(self.root, textvariable=self.status, anchor="w").pack(fill="x", padx=10)
        self.preview_box = tk.Text(self.root, height=12, wrap="none"); self.preview_box.pack(fill="both", expand=True, padx=10, pady=(4,10))

    def _sync_quality_label(self, _evt=None):
        self.jpg_quality.set(int(float(self.q_scale.get())))
        self.q_label.config(text=str(self.jpg_quality.get()))

    # ---------- inputs ----------
    def choose_files(self):
        paths = filedialog.askopenfilenames(
            title="Select image files",
            filetypes=[("Images", "*.jpg;*.jpeg;*.png;*.webp;*.bmp;*.tiff"), ("All files", "*.*")]
        )
        if paths:
            self.files = list(paths); self.folder = None
            self.input_label.config(text=f"{len(self.files)} files selected")

    def choose_folder(self):
        folder = filedialog.askdirectory(title="Select folder containing images")
        if folder:
            self.folder = folder; self.files = []
            self.input_label.config(text=f"Folder selected ({len(list_images(folder))} images)")

    def choose_output(self):
        folder = filedialog.askdirectory(title="Select output folder")
        if folder:
            self.output_folder = folder
            self.output_label.config(text=folder)

    # ---------- actions ----------
    def _options(self) -> ResizeOptions:
        return ResizeOptions(
            sizes=tuple(parse_sizes_field(self.sizes.get())),
            function=self.function.get(),
            name_template=self.name_template.get() or "{name}-w{width}",
            format_choice=self.format_choice.get(),
            jpg_quality=int(self.jpg_quality.get()),
            overwrite=self.overwrite.get(),
        )

    def preview(self):
        files = gather_inputs(self.files, self.folder)
        opts = self._options()
        if not files or not opts.sizes:
            messagebox.showwarning("Nothing to do", "Please select images and enter at least one size")
            return

        self.preview_box.delete("1.0", tk.END)
        self.preview_box.insert(tk.END, f"Selected {len(files)} images, {len(opts.sizes)} sizes.\n\nTarget sizes (first 10 images):\n")

        for fp in files[:10]:
            try:
                real = probe_dimension(fp)
            except OSError as e:
                self._append(f"- {os.path.basename(fp)} [error: {e}]")
                continue
            for size in opts.sizes:
                try:
                    target = self.engine.to_pixel(with_function(size, opts.function, self.engine), real)
                    self._append(f"- {os.path.basename(fp)} ({real.width}x{real.height}) @ {size} -> ({target.width}x{target.height})")
                except SizeSpecError as e:
                    self._append(f"- {os.path.basename(fp)} @ {size} [error: {e}]")

        self.status.set("Preview generated. Ready to resize.")

    def run(self):
        files = gather_inputs(self.files, self.folder)
        opts = self._options()
        if not files or not opts.sizes:
            messagebox.showwarning("Nothing to do", "Please select images and enter at least one size")
            return

        # default output = '<source>/output'
        out = self.output_folder
        if not out:
            base_root = os.path.dirname(files[0]) if self.files else (self.folder or os.getcwd())
            out = os.path.join(base_root, "output")

        self.progress.configure(value=0, maximum=len(files) * len(opts.sizes))
        t = threading.Thread(target=self._worker, args=(files, out, opts), daemon=True)
        t.start()

    def _worker(self, files: List[str], out: str, opts: ResizeOptions):
        ok = err = 0

        def on_progress(done: int, total: int):
            self.root.after(0, lambda: self.progress.configure(value=done))

        for res in resize_many(files, out, opts, self.engine, progress=on_progress, log=self._append):
            if isinstance(res, ResizeResult) and res.ok:
                ok += 1
            else:
                err += 1

        self.root.after(0, self.status.set, f"Done. Success: {ok}, Errors: {err}. Output: {out}")
        self._append(f"\nFinished.\nSuccess: {ok}\nErrors: {err}\nOutput: {out}")

    def _append(self, text: str):
        # may be called from the worker thread; Tk widgets are only touched on the main loop
        self.root.after(0, self._write, text)

    def _write(self, text: str):
        self.preview_box.insert(tk.END, text + "\n"); self.preview_box.see(tk.END)


def main():
    root = tk.Tk()
    ImageResizerGUI(root)
    root.mainloop()


if __name__ == "__main__":
    main()
