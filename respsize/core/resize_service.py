import logging
import os
from typing import Any, Callable, Iterable, Iterator, Optional

from PIL import Image

from .engine import SizeEngine
from .io_utils import next_available
from .models import EffectiveDimension, RealDimension, ResizeOptions, ResizeResult

logger = logging.getLogger(__name__)

EXT_TO_PIL = {"jpg": "JPEG", "jpeg": "JPEG", "png": "PNG", "webp": "WEBP", "bmp": "BMP", "tiff": "TIFF"}
ProgressCb = Callable[[int, int], None]
LogCb = Callable[[str], None]


def probe_dimension(path: str) -> RealDimension:
    """Read the pixel size of an image without decoding it."""
    with Image.open(path) as im:
        w, h = im.size
    return RealDimension(w, h)


def with_function(size: Any, function: Optional[str], engine: SizeEngine) -> Any:
    """Apply ``function`` as the scaling function unless ``size`` names its own."""
    if not function:
        return size
    elaborated = engine.elaborate(size)
    if elaborated.get("function") is None:
        elaborated["function"] = function
    return elaborated


def destination_name(template: str, src_path: str, size: Any, engine: SizeEngine) -> str:
    """Render an output file name (without extension) for ``size``.

    Placeholders: ``{name}`` (source stem), ``{width}`` and ``{height}`` as
    written in the size object. A ``name`` key on the size object replaces
    ``template``.
    """
    elaborated = engine.elaborate(size)
    fields = {
        "name": os.path.splitext(os.path.basename(src_path))[0],
        "width": "" if elaborated.get("width") is None else elaborated["width"],
        "height": "" if elaborated.get("height") is None else elaborated["height"],
    }
    return str(elaborated.get("name") or template).format(**fields)


def _output_format(src: str, format_choice: str):
    in_ext = os.path.splitext(src)[1].lstrip(".").lower()
    out_ext = in_ext if format_choice == "keep" else format_choice
    pil_fmt = EXT_TO_PIL.get(out_ext)
    if not pil_fmt:
        raise ValueError(f"Unknown output format .{out_ext}")
    return out_ext, pil_fmt


def _save(im: Image.Image, dst: str, pil_fmt: str, jpg_quality: int):
    if pil_fmt == "JPEG" and im.mode in ("RGBA", "LA", "P"):
        im = im.convert("RGB")
    kw = {"quality": int(jpg_quality), "optimize": True} if pil_fmt == "JPEG" else {}
    im.save(dst, format=pil_fmt, **kw)


def resize_image(src: str, dst: str, target: EffectiveDimension, pil_fmt: str, jpg_quality: int = 85):
    """Rasterize ``src`` at ``target`` and write it to ``dst``."""
    tw, th = target.as_tuple()
    with Image.open(src) as im:
        sw, sh = im.size
        if (tw, th) != (sw, sh):
            resample = Image.LANCZOS if (tw < sw or th < sh) else Image.BICUBIC
            im = im.resize((tw, th), resample=resample)
        _save(im, dst, pil_fmt, jpg_quality)


def resize_one(src: str, out_dir: str, size: Any, opts: ResizeOptions,
               engine: SizeEngine, real: Optional[RealDimension] = None) -> ResizeResult:
    """Resize ``src`` to one size object. Errors propagate to the caller."""
    real = real or probe_dimension(src)
    target = engine.to_pixel(with_function(size, opts.function, engine), real)
    if target.width == 0 or target.height == 0:
        raise ValueError(f"Resolved size {target.width}x{target.height} is empty")

    out_ext, pil_fmt = _output_format(src, opts.format_choice)
    dst = os.path.join(out_dir, f"{destination_name(opts.name_template, src, size, engine)}.{out_ext}")
    if not opts.overwrite:
        dst = next_available(dst)

    resize_image(src, dst, target, pil_fmt, opts.jpg_quality)
    logger.debug("Resized %s (%dx%d) to %dx%d -> %s", src, real.width, real.height, *target.as_tuple(), dst)
    return ResizeResult(src, dst, True, None, size, (real.width, real.height), target.as_tuple())


def resize_many(inputs: Iterable[str], out_dir: str, opts: ResizeOptions,
                engine: Optional[SizeEngine] = None,
                progress: ProgressCb | None = None, log: LogCb | None = None) -> Iterator[ResizeResult]:
    """Resize every input to every size in ``opts.sizes``.

    Yields one result per (input, size) pair; a failing pair is reported in
    its result and the batch carries on.
    """
    engine = engine or SizeEngine()
    os.makedirs(out_dir, exist_ok=True)
    files = list(inputs)
    total = len(files) * len(opts.sizes)
    done = 0
    for src in files:
        real = None
        for size in opts.sizes:
            try:
                real = real or probe_dimension(src)
                yield resize_one(src, out_dir, size, opts, engine, real)
            except Exception as e:
                msg = f"[Error] {os.path.basename(src)} @ {size!r} -> {e}"
                logger.warning(msg)
                if log: log(msg)
                yield ResizeResult(src, None, False, str(e), size)
            finally:
                done += 1
                if progress: progress(done, total)
