"""
uiforge core: metadata resolution and layout compilation.

Submodules are imported directly (`uiforge.core.compiler`,
`uiforge.core.ir`, ...); adapters depend on the IR and query modules, so
this package imports nothing eagerly.
"""
