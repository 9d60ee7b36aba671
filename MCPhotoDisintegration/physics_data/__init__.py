"""Physics data package containing photo-disintegration rate tables.

Rate tables are looked up in the ``rate_tables`` directory of this package
unless the ``MCPHOTODIS_DATA_PATH`` environment variable or an explicit
directory points elsewhere.
"""

import os
from pathlib import Path
from typing import Optional, Union


DATA_PATH_ENVIRONMENT_VARIABLE = 'MCPHOTODIS_DATA_PATH'


def get_physics_data_dir() -> Path:
    """Get the physics data directory path.

    Returns:
        Path to the physics_data directory
    """
    return Path(__file__).parent


def get_rate_table_directory() -> Path:
    """Get the directory searched for rate tables by default.

    Returns:
        Directory named by MCPHOTODIS_DATA_PATH, or the bundled one
    """
    override = os.environ.get(DATA_PATH_ENVIRONMENT_VARIABLE)
    if override:
        return Path(override)
    return get_physics_data_dir() / 'rate_tables'


def get_rate_table_path(
    file_name: str,
    data_directory: Optional[Union[str, Path]] = None
) -> Path:
    """Get path to a rate table file.

    Args:
        file_name: Name of the table file (e.g. 'photodis_CMB.txt')
        data_directory: Directory to search instead of the default one

    Returns:
        Path to the rate table file

    Raises:
        FileNotFoundError: If the table file doesn't exist
    """
    directory = Path(data_directory) if data_directory else get_rate_table_directory()
    table_path = directory / file_name
    if not table_path.is_file():
        raise FileNotFoundError(
            f"Rate table not found: {table_path}\n"
            f"Available tables: {list_rate_tables(directory)}"
        )
    return table_path


def list_rate_tables(data_directory: Optional[Union[str, Path]] = None) -> list:
    """List all available rate tables.

    Args:
        data_directory: Directory to list instead of the default one

    Returns:
        Sorted list of table file names (text and HDF5)
    """
    directory = Path(data_directory) if data_directory else get_rate_table_directory()
    if not directory.exists():
        return []
    return sorted(
        f.name for f in directory.iterdir()
        if f.suffix in ('.txt', '.h5')
    )


__all__ = [
    'DATA_PATH_ENVIRONMENT_VARIABLE',
    'get_physics_data_dir',
    'get_rate_table_directory',
    'get_rate_table_path',
    'list_rate_tables',
]
