"""Kernel – error hierarchy and identifier types shared by every layer."""
