"""User-facing operations: greeting, version reporting, archives and statistics."""