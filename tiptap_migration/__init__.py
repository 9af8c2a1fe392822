"""
Top-level package for the WordPress → TipTap content migration.

This package bundles the components required to extract posts and pages
from the legacy WordPress export, convert their HTML to TipTap documents
with migrated asset URLs, audit the result and generate redirects.
Modules are split into subpackages:

* :mod:`tiptap_migration.extractors` – WXR export parsing and JSON loading
* :mod:`tiptap_migration.parsers` – the HTML → TipTap converter
* :mod:`tiptap_migration.auditors` – image URL checks and tag inventory
* :mod:`tiptap_migration.models` – pydantic records for inputs and outputs
* :mod:`tiptap_migration.utils` – event logging, pre-flight checks, redirects

The converter has no knowledge of configuration or execution strategy;
orchestration is handled in :mod:`tiptap_migration.migration_tool`.
"""
