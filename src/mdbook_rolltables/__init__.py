"""mdBook preprocessor that turns ``|d|...|`` tables into dice roll tables.

Submodules:
  events        -- token-stream event types
  markdown      -- markdown-it tokenizer / mdformat renderer bridge
  config        -- DieConfig pydantic model and option loading
  errors        -- exception hierarchy
  book          -- mdBook JSON book traversal
  preprocessor  -- RollTables preprocessor and mdBook protocol helpers
  cli           -- ``mdbook-rolltables`` command
  tables        -- extraction, detection, dice labels, chapter pipeline
"""
