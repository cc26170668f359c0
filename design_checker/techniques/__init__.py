"""Auto-discovery of technique modules.

Every .py file in this package that defines a `technique` object is
auto-registered by design_checker.registry.discover().

The explicit imports below ensure PyInstaller includes these modules
in the frozen binary. Without them, pkgutil.iter_modules cannot find
the technique files at runtime.
"""

# PyInstaller hidden imports: keep this list in sync with technique modules
import design_checker.techniques.accessibility as _accessibility  # noqa: F401
import design_checker.techniques.colour as _colour  # noqa: F401
import design_checker.techniques.critique as _critique  # noqa: F401
import design_checker.techniques.layout as _layout  # noqa: F401
import design_checker.techniques.ocr as _ocr  # noqa: F401
import design_checker.techniques.typography as _typography  # noqa: F401
