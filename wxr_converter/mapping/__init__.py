"""
Mapping of WXR elements onto entity fields: the field router, its handler
tables and the per-element transforms.
"""
