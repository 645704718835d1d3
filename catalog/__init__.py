"""
catalog — Client-side product browsing.

Provides:
  • Conjunctive filter + stable sort over a held product page
  • Page-window computation for pagination controls
  • ``CatalogView`` state holder and the async ``CatalogClient``
"""
