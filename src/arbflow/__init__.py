"""arbflow: LLM-assisted localization of Flutter ARB bundles."""

__version__ = "0.3.0"
