"""Catalog engine: entities, groups, the name-keyed stores and text records.

Layout:
    errors.py      # CatalogError and its kinds
    entities.py    # Photo, Video, Film
    group.py       # Group of shared entity references
    manager.py     # Manager: entity + group stores, factories, lookup, delete
    codec.py       # record parse/format and file replay

Entities are only ever built by `Manager`; import it from `mediacat.catalog.manager`.
"""
