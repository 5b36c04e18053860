"""Starter .rsloc.toml template."""

DEFAULT_TOML = """\
# rsloc configuration
version = "1.0"

[count]
# include = ["src/**"]          # empty = every .rs file
exclude = []                    # e.g. ["benches/*", "*/generated/*"]
# crates = ["core"]             # empty = every crate
# types = ["code", "tests"]     # code | tests | examples; empty = all
jobs = 0                        # 0 = one worker per CPU
fail_on_error = false           # exit 1 when a file cannot be read

[output]
format = "table"                # table | json | csv | yaml
by_file = false
by_crate = false
by_module = false
show_summary = true
"""
