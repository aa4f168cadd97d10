# Services package.
#
#   article_service      — article provider: fetch, filtered pages, move, count
#   folder_service       — folder provider: hierarchy lookups, create/delete
#   aggregation_service  — composes both into folder-aware article views
#
# Providers are classes constructed with the request's AsyncSession rather
# than module-level functions taking it as their first argument: the
# aggregation service holds them as collaborators typed by Protocol, so
# tests can swap in stand-ins.  The session still comes from ``get_db``,
# which keeps the transaction boundary in the router layer.
