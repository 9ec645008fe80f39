"""
Settings for the bootstrap and machine setup scripts.

Pydantic models, the layered configuration loader and the terminal prompts.
"""
