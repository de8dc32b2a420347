"""Help-screen sections, in display order."""

from cyclopts import Group

SOURCE_GROUP = Group.create_ordered("Source")
TIME_GROUP = Group.create_ordered("Time")
OUTPUT_GROUP = Group.create_ordered("Output")
EXPORT_GROUP = Group.create_ordered("Export")
RUNTIME_GROUP = Group.create_ordered("Runtime")

__all__ = ["EXPORT_GROUP", "OUTPUT_GROUP", "RUNTIME_GROUP", "SOURCE_GROUP", "TIME_GROUP"]
