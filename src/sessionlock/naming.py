"""Lock name derivation."""


def resolve_lock_name(schema_name: str, table_name: str) -> str:
    """
    Build the store resource name for the changelog lock.

    The name is upper-cased so that every process configured with the same
    schema and table contends on the same resource, regardless of how the
    names were spelled in configuration. Inputs are not validated.

    Args:
        schema_name: Default schema of the database (e.g., "dbo")
        table_name: Name of the changelog lock table

    Returns:
        Lock name in the form "SCHEMA.TABLE"

    Example:
        >>> resolve_lock_name("dbo", "DatabaseChangeLogLock")
        'DBO.DATABASECHANGELOGLOCK'
    """
    return f"{schema_name}.{table_name}".upper()
