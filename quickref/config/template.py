"""Default configuration template.

This template is written to ~/.config/quickref/config.toml
when running `quickref config init`.
"""

CONFIG_TEMPLATE = """\
# quickref configuration

[defaults]
# Unity project directory. Relative paths are resolved from the
# current working directory.
project_dir = "."

# Directories searched inside the project.
roots = ["Assets", "Packages", "ProjectSettings"]

# Serialized file types that can hold GUID references.
# Add "meta" to also search importer settings.
extensions = ["prefab", "unity", "mat", "asset"]

max_results = 500
max_workers = 8
history_limit = 20
log_level = "WARNING"
"""
