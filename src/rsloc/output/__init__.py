"""Report renderers: Rich tables, JSON, CSV and YAML."""
