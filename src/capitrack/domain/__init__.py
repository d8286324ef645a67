"""Domain layer for capitrack application.

Services live in their own modules (capitrack.domain.account, ...) and are
imported from there; this package stays free of imports so the database
layer can load entities without pulling the services in.
"""
