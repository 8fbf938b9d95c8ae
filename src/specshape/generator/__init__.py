"""Schema generator -- turn a dereferenced API description into JSON Schema roots.

This sub-package is the core of the specshape pipeline: taking the document
produced by :mod:`specshape.parser` and assembling the ``Paths``,
``Webhooks`` and ``Components`` schemas that describe every operation's
request and response shapes.

Typical usage::

    from specshape.generator import build_schemas

    roots = build_schemas(resolved_document)
    roots["Paths"]["properties"]["/pets"]["properties"]["get"]

Sub-modules, leaves first:

* :mod:`~specshape.generator.nodes` -- Allocation helpers for object,
  union and enum nodes.
* :mod:`~specshape.generator.parameters` -- Parameter resolution, the
  shared schema-or-content derivation, and path/operation merging.
* :mod:`~specshape.generator.request` -- Request body resolution and the
  request schema (parameter buckets plus one branch per content type).
* :mod:`~specshape.generator.responses` -- Header and content resolution
  and the per-status response branches.
* :mod:`~specshape.generator.operation` -- One operation's
  ``{request, responses}`` object.
* :mod:`~specshape.generator.containers` -- Lookup of path items in the
  ``paths`` and ``webhooks`` containers.
* :mod:`~specshape.generator.tree` -- The ``Paths`` and ``Webhooks`` trees.
* :mod:`~specshape.generator.components` -- Token and schema views of
  ``components``.
* :mod:`~specshape.generator.document` -- The three named roots.
"""

from specshape.generator.components import build_components_schema, build_components_token
from specshape.generator.document import ROOT_NAMES, build_schemas
from specshape.generator.tree import build_paths_schema, build_webhooks_schema

__all__ = [
    "ROOT_NAMES",
    "build_components_schema",
    "build_components_token",
    "build_paths_schema",
    "build_schemas",
    "build_webhooks_schema",
]
