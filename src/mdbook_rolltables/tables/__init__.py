"""Roll-table extraction, detection, labelling, and reassembly.

Submodules:
  extraction  -- Table structure, extract_table() and table_events()
  detection   -- is_roll_table() pattern check
  dice        -- die selection and label generation
  pipeline    -- transform_events() and process_chapter()
"""
