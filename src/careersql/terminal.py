"""
Terminal Commands - The plain shell that hosts the SQL console
Implements ls and imgcat over a fixed, read-only file list.
"""

from typing import Dict, List, Optional

from .constants import FILE_SIZES, IMAGE_URL_PREFIX, LS_DATE, LS_TOTAL, SHELL_FILES


class CommandResult:
    """Output of one shell command"""

    def __init__(self, output: str = '', image: Optional[str] = None,
                 clear: bool = False, enter_sql: bool = False):
        self.output = output
        self.image = image  # URL of an image to display
        self.clear = clear
        self.enter_sql = enter_sql

    def __repr__(self):
        return f"CommandResult({self.output!r}, image={self.image!r})"


def humanize_size(size_bytes: int) -> str:
    """1536 -> '2K'"""
    units = ['B', 'K', 'M', 'G']
    size = float(size_bytes)
    unit_index = 0
    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1
    # Halves round up
    return f"{int(size + 0.5)}{units[unit_index]}"


class Terminal:
    """Shell mode commands"""

    def __init__(self, files: Optional[List[str]] = None,
                 file_sizes: Optional[Dict[str, int]] = None):
        self.files = list(files if files is not None else SHELL_FILES)
        self.file_sizes = dict(file_sizes if file_sizes is not None else FILE_SIZES)

    def execute(self, command: str) -> CommandResult:
        """Run one shell command line"""
        parts = command.strip().split()
        if not parts:
            return CommandResult()
        name, args = parts[0], parts[1:]

        lowered = name.lower()
        if lowered == 'ls':
            options = ''.join(arg for arg in args if arg.startswith('-')).replace('-', '')
            return CommandResult(self.ls(options))
        elif lowered in ('imgcat', 'img2sixel'):
            return self.imgcat(name, args)
        elif lowered == 'clear':
            return CommandResult(clear=True)
        elif lowered == 'sql':
            return CommandResult(clear=True, enter_sql=True)
        return CommandResult(f"command not found: {name}")

    def ls(self, options: str = '') -> str:
        """
        List files.

        Options:
            a: include . and ..
            l: long listing
            h: human readable sizes (with l)
        """
        entries = list(self.files)
        if 'a' in options:
            entries = ['.', '..'] + entries

        if 'l' not in options:
            return '    '.join(entries)

        lines = [f"total {LS_TOTAL}"]
        for entry in entries:
            is_directory = entry in ('.', '..')
            size = self.file_sizes.get(entry, 0)
            lines.append(' '.join([
                'drwxr-xr-x' if is_directory else '-rw-r--r--',
                '1'.rjust(2),
                'user'.ljust(6),
                'user'.ljust(6),
                (humanize_size(size) if 'h' in options else str(size)).rjust(8),
                LS_DATE.ljust(12),
                entry,
            ]))
        return '\n'.join(lines)

    def imgcat(self, name: str, args: List[str]) -> CommandResult:
        """Resolve an image file to the URL it is served from"""
        if not args:
            return CommandResult(f"Error: {name} requires a filename argument")
        filename = args[0]
        if filename not in self.files:
            return CommandResult(f'Error: Image "{filename}" not found')
        url = IMAGE_URL_PREFIX + filename
        return CommandResult(url, image=url)
