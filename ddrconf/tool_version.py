# ddrconf/tool_version.py
# Tool version constants. Single authoritative definition.
# Referenced by the CLI entry points, the table loader and the failure
# handler for version stamping.

TOOL_VERSION: str = "1.0.0"

# Format version of the JSON timing files accepted by TimingLoader.
# A file declaring any other format_version is rejected.
STORAGE_FORMAT_VERSION: str = "1.0.0"
