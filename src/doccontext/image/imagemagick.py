"""ImageMagick renderer — shells out to the `magick` command."""

from __future__ import annotations

import logging
import subprocess

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from doccontext.config.defaults import DEFAULT_BACKGROUND
from doccontext.config.schema import ImageConfig, describe_validation_error
from doccontext.errors.exceptions import ConfigurationError, RenderError

logger = logging.getLogger(__name__)

_MAGICK_BINARY = "magick"
_NEUTRAL_MODULATE = 100


class ImageMagickOptions(BaseModel):
    """ImageMagick-specific entries of ImageConfig.options.

    brightness and saturation are modulate percentages (100 is neutral),
    contrast is -100..100 (0 is neutral), rotation is in degrees.
    """

    model_config = ConfigDict(extra="forbid")

    background: str = Field(default=DEFAULT_BACKGROUND, min_length=1)
    brightness: int | None = Field(default=None, ge=0, le=200)
    contrast: int | None = Field(default=None, ge=-100, le=100)
    saturation: int | None = Field(default=None, ge=0, le=200)
    rotation: int | None = Field(default=None, ge=0, le=360)


class ImageMagickRenderer:
    """Renders PDF pages with ImageMagick.

    Configuration is finalized and validated here, so an invalid format,
    quality or option fails construction rather than the first render.
    """

    def __init__(self, config: ImageConfig | None = None) -> None:
        cfg = (config or ImageConfig()).finalize()

        fmt = cfg.format.lower()
        if fmt not in ("png", "jpg", "jpeg"):
            raise ConfigurationError(
                f"unsupported image format: {cfg.format} (must be 'png' or 'jpg')"
            )
        if fmt == "jpeg":
            fmt = "jpg"
        cfg.format = fmt

        if fmt == "jpg" and not 1 <= cfg.quality <= 100:
            raise ConfigurationError(f"JPEG quality must be 1-100, got {cfg.quality}")

        try:
            self._options = ImageMagickOptions.model_validate(cfg.options)
        except ValidationError as e:
            raise ConfigurationError(
                f"invalid ImageMagick options: {describe_validation_error(e)}"
            ) from e

        self._config = cfg

    @property
    def options(self) -> ImageMagickOptions:
        return self._options

    def render(self, input_path: str, page_number: int, output_path: str) -> None:
        """Run magick and wait for it. There is no timeout."""
        args = self.build_args(input_path, page_number, output_path)
        logger.debug("Running %s %s", _MAGICK_BINARY, " ".join(args))
        try:
            proc = subprocess.run(
                [_MAGICK_BINARY, *args],
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise RenderError(
                f"imagemagick not found: is '{_MAGICK_BINARY}' installed?",
                page_number=page_number,
            ) from e

        if proc.returncode != 0:
            output = (proc.stdout or "") + (proc.stderr or "")
            raise RenderError(
                f"imagemagick failed with exit code {proc.returncode}\nOutput: {output}",
                page_number=page_number,
                output=output,
            )

    def file_extension(self) -> str:
        return self._config.format

    def settings(self) -> ImageConfig:
        return self._config.model_copy(deep=True)

    def parameters(self) -> list[str]:
        """background always, then brightness, contrast, rotation, saturation when set."""
        opts = self._options
        params = [f"background={opts.background}"]
        if opts.brightness is not None:
            params.append(f"brightness={opts.brightness}")
        if opts.contrast is not None:
            params.append(f"contrast={opts.contrast}")
        if opts.rotation is not None:
            params.append(f"rotation={opts.rotation}")
        if opts.saturation is not None:
            params.append(f"saturation={opts.saturation}")
        return params

    def build_args(self, input_path: str, page_number: int, output_path: str) -> list[str]:
        """Build the magick argument list.

        Order matters to ImageMagick: -density before the input, then
        flattening onto the background, then filters, then output settings.
        """
        opts = self._options
        args = [
            "-density", str(self._config.dpi),
            f"{input_path}[{page_number - 1}]",
            "-background", opts.background,
            "-flatten",
        ]

        if opts.rotation:
            args += ["-rotate", str(opts.rotation)]

        brightness = opts.brightness if opts.brightness is not None else _NEUTRAL_MODULATE
        saturation = opts.saturation if opts.saturation is not None else _NEUTRAL_MODULATE
        if brightness != _NEUTRAL_MODULATE or saturation != _NEUTRAL_MODULATE:
            args += ["-modulate", f"{brightness},{saturation}"]

        if opts.contrast:
            args += ["-brightness-contrast", f"0,{opts.contrast}"]

        if self._config.format == "jpg":
            args += ["-quality", str(self._config.quality)]

        args.append(output_path)
        return args
