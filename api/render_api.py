from typing import Optional

from coloring.base import PixelType, PIXEL_TYPES
from fractals.base import Resolution, Viewport, RenderSettings
from rendering.buffer import ImageBuffer
from rendering.core import ParallelRenderer
from utils.enums import BackendType


class RenderConfigBuilder:
    """
    Builder for configuring render settings.
    """
    def __init__(self, renderer: Optional[ParallelRenderer] = None):
        self.renderer = renderer
        self._escape_limit: Optional[int] = None
        self._workers: Optional[int] = None
        self._pixel_type: Optional[PixelType] = None
        self._backend: Optional[BackendType] = None

    def escape_limit(self, value: int) -> 'RenderConfigBuilder':
        self._escape_limit = value
        return self

    def workers(self, value: int) -> 'RenderConfigBuilder':
        self._workers = value
        return self

    def pixel_type(self, value) -> 'RenderConfigBuilder':
        self._pixel_type = PIXEL_TYPES[value] if isinstance(value, str) else value
        return self

    def backend(self, backend: BackendType) -> 'RenderConfigBuilder':
        self._backend = backend
        return self

    def build(self) -> RenderSettings:
        base = self.renderer.settings if self.renderer is not None else RenderSettings()
        return RenderSettings(
            escape_limit=self._escape_limit if self._escape_limit is not None else base.escape_limit,
            worker_count=self._workers if self._workers is not None else base.worker_count,
            pixel_type=self._pixel_type or base.pixel_type,
            backend=self._backend or base.backend,
        )

    def apply(self) -> RenderSettings:
        # Apply settings to the renderer
        settings = self.build()
        if self.renderer is not None:
            self.renderer.configure(settings)
        return settings


class RenderAPI:
    """
    Facade for one-shot rendering with a reusable renderer.
    """
    def __init__(self, renderer: Optional[ParallelRenderer] = None):
        self.renderer: ParallelRenderer = renderer or ParallelRenderer()

    # ----------- Facade methods --------------------------
    def configure(self) -> RenderConfigBuilder:
        """
        Configures the renderer with a fluent builder pattern.

        Returns:
            RenderConfigBuilder: A builder object for configuring renderer settings.
        """
        return RenderConfigBuilder(self.renderer)

    def render(self, resolution: Resolution, viewport: Viewport) -> ImageBuffer:
        """
        Renders the viewport at the given resolution and blocks until done.

        Args:
            resolution (Resolution): Output size in pixels.
            viewport (Viewport): Region of the complex plane to sample.

        Returns:
            ImageBuffer: The frozen intensity buffer.
        """
        return self.renderer.render(resolution, viewport)

    def close(self) -> None:
        """
        Releases backend resources.
        """
        self.renderer.close()
