from .controller import SurfaceHooks, TextualSurface

__all__ = ["SurfaceHooks", "TextualSurface"]
