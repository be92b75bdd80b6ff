"""craft-config-gen: compile a content-model description into Craft CMS project config."""

__version__ = "0.1.0"
