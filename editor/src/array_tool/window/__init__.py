"""Mixins composing the array tool main window."""
