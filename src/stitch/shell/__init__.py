"""The site shell — serve-time rewriting of static HTML pages.

Leaves first:
    assets     -- fail-soft lookups of partials and stylesheets
    route      -- request path -> normalized path + slug
    freshness  -- one captured instant per request, in every format needed
    rewriter   -- streaming HTML rewriter (tokenizer events, no tree)
    pipeline   -- the shell's rewrite rules, wired onto a rewriter
    finalize   -- cache validators and response headers
"""

from stitch.shell.assets import (
    AssetResolver,
    AssetStore,
    DirectoryAssetStore,
    HTTPAssetStore,
    MemoryAssetStore,
    ResolvedAssets,
)
from stitch.shell.finalize import finalize
from stitch.shell.freshness import Freshness
from stitch.shell.pipeline import RewriteOptions, build_rewriter
from stitch.shell.rewriter import Element, HTMLRewriter
from stitch.shell.route import RouteContext, derive_route

__all__ = [
    "AssetResolver",
    "AssetStore",
    "DirectoryAssetStore",
    "Element",
    "Freshness",
    "HTMLRewriter",
    "HTTPAssetStore",
    "MemoryAssetStore",
    "ResolvedAssets",
    "RewriteOptions",
    "RouteContext",
    "build_rewriter",
    "derive_route",
    "finalize",
]
