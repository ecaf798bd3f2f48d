"""Backend-agnostic flow layout engine.

Submodules:

- ``geometry``: points, sizes, rectangles and page sizes
- ``text_metrics``: approximate text width and greedy word wrap
- ``table_expansion``: table shorthand to explicit cell grid
- ``height_estimator``: per block height estimates
- ``page_engine``: layout context with cursor and page management
- ``block_renderer``: drawing of each block type through backend primitives
- ``flow_layout``: placement loop
- ``decorations``: page header, footer and title
- ``layout_validator``: drawn element registry and geometry checks
"""
