# Services package init
"""
Snippetbox — Services Layer
=============================

What:  Business logic between the request handlers and the database.

Service Inventory:
    - SnippetModel: insert / get / latest over the snippets table
"""
