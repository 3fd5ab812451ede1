"""Feature document model and execution driver for behaviour specifications.

The `cuke_core` package reads feature documents written as YAML streams
and builds immutable in-memory aggregates from them.

Key features:
- feature aggregates built through an ordered callback protocol,
  with background inheritance and scenario name tracking;
- scenario outlines materialized into one run unit per examples row;
- filtered, deduplicated and deterministically sorted feature loading;
- execution against pluggable formatter, reporter and runtime objects.

The package leaves step definitions, hooks and report formats to the
projects using it.
"""
