"""
Core modules for visionary.

This package contains the core business logic for:
- Configuration management
- Studio state (categories, assets, selection, history)
- Prompt composition
- Image generation and reference images
"""
