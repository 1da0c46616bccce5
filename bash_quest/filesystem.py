"""
Virtual File System
====================
Directory tree, current-path cursor and exploration state.

Every operation is pure: it takes a FileSystemState and returns a new one
(or a FileSystemError value for failed navigation). Updates rebuild only
the spine from the root down to the modified directory.

Directory contents stay hidden until the player runs `ls` there.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .components import FileSystemNode, FileSystemState, NodeKind


# =============================================================================
# FILE POOLS
# =============================================================================
# Realistic names per directory category. Spawned files are drawn from here.

FILE_POOLS: Dict[str, Tuple[str, ...]] = {
    'documents': (
        'resume.pdf', 'report.docx', 'notes.txt', 'budget.xlsx',
        'presentation.pptx', 'contract.pdf', 'todo.md', 'meeting_minutes.txt',
        'project_plan.xlsx', 'thesis.pdf', 'letter.docx', 'schedule.xlsx',
    ),
    'pictures': (
        'vacation.jpg', 'family.png', 'party.jpg', 'screenshot.png',
        'profile.jpg', 'landscape.png', 'birthday.jpg', 'wedding.png',
        'sunset.jpg', 'cat.png', 'dog.jpg', 'selfie.png',
    ),
    'videos': (
        'tutorial.mp4', 'movie.mkv', 'lecture.mp4', 'gameplay.webm',
        'interview.mp4', 'concert.mkv', 'vlog.mp4', 'animation.webm',
        'presentation.mp4', 'travel.mkv', 'wedding.mp4', 'highlights.webm',
    ),
    'music': (
        'song.mp3', 'album.flac', 'playlist.m3u', 'podcast.mp3',
        'soundtrack.flac', 'recording.wav', 'ringtone.mp3', 'audiobook.m4a',
        'live_performance.mp3', 'remix.flac', 'voice_memo.wav', 'radio_show.mp3',
    ),
    'downloads': (
        'installer.exe', 'archive.zip', 'ebook.pdf', 'software.dmg',
        'update.msi', 'dataset.csv', 'driver.exe', 'backup.tar.gz',
        'movie.mp4', 'album.zip', 'game.iso', 'firmware.bin',
    ),
    'code': (
        'script.js', 'index.html', 'styles.css', 'app.py',
        'main.cpp', 'config.json', 'server.js', 'database.sql',
        'utils.py', 'component.jsx', 'api.ts', 'Dockerfile',
    ),
    'config': (
        'settings.json', 'config.yml', '.env', 'preferences.xml',
        'options.ini', 'profile.conf', 'rules.json', 'schema.xml',
        'routes.yml', 'users.json', 'permissions.conf', 'defaults.ini',
    ),
    'logs': (
        'system.log', 'error.log', 'access.log', 'debug.log',
        'application.log', 'server.log', 'events.log', 'audit.log',
        'performance.log', 'security.log', 'network.log', 'database.log',
    ),
}

# Directory name -> pool category
_POOL_ALIASES: Dict[str, str] = {
    'documents': 'documents', 'docs': 'documents',
    'pictures': 'pictures', 'pics': 'pictures', 'images': 'pictures',
    'videos': 'videos', 'movies': 'videos',
    'music': 'music', 'audio': 'music',
    'downloads': 'downloads', 'dl': 'downloads',
    'code': 'code', 'src': 'code', 'source': 'code',
    'config': 'config', 'conf': 'config', 'etc': 'config',
    'log': 'logs', 'logs': 'logs', 'var': 'logs',
}


# =============================================================================
# ERRORS
# =============================================================================

NOT_FOUND = 'not_found'
AT_ROOT = 'at_root'


@dataclass(frozen=True)
class FileSystemError:
    """Failed navigation. Returned, never raised."""
    kind: str
    target: str = ''


# =============================================================================
# CONSTRUCTION
# =============================================================================

def make_file(name: str, linked_enemy_id: Optional[str] = None) -> FileSystemNode:
    return FileSystemNode(name, NodeKind.FILE, (), linked_enemy_id)


def make_directory(name: str, children: Sequence[FileSystemNode] = (),
                   linked_enemy_id: Optional[str] = None) -> FileSystemNode:
    return FileSystemNode(name, NodeKind.DIRECTORY, tuple(children), linked_enemy_id)


def _pool_files(category: str, count: int) -> List[FileSystemNode]:
    return [make_file(name) for name in FILE_POOLS[category][:count]]


def initial_file_system() -> FileSystemState:
    """Build the starting world. Only the root is explored."""
    user = make_directory('user', [
        make_directory('documents', _pool_files('documents', 5)),
        make_directory('pictures', _pool_files('pictures', 5)),
        make_directory('videos', _pool_files('videos', 5)),
        make_directory('music', _pool_files('music', 5)),
        make_directory('downloads', _pool_files('downloads', 5)),
        make_directory('code', _pool_files('code', 5)),
        make_file('readme.txt'),
    ])
    root = make_directory('root', [
        make_directory('home', [user]),
        make_directory('bin', [make_file(name) for name in
                               ('bash', 'ls', 'cd', 'mv', 'cp', 'rm')]),
        make_directory('etc', _pool_files('config', 6)),
        make_directory('var', [make_directory('log', _pool_files('logs', 6))]),
    ])
    return FileSystemState(root=root, current_path=(), explored=frozenset({'/'}))


# =============================================================================
# QUERIES
# =============================================================================

def _child_directory(node: FileSystemNode, name: str) -> Optional[FileSystemNode]:
    for child in node.children:
        if child.is_directory and child.name == name:
            return child
    return None


def resolve(root: FileSystemNode, path: Sequence[str]) -> FileSystemNode:
    """
    Walk `path` from `root` by directory name.

    Stops at the deepest resolvable ancestor if a segment is missing.
    """
    current = root
    for segment in path:
        found = _child_directory(current, segment)
        if found is None:
            break
        current = found
    return current


def current_directory(fs: FileSystemState) -> FileSystemNode:
    return resolve(fs.root, fs.current_path)


def format_path(path: Sequence[str]) -> str:
    return '/' + '/'.join(path)


def path_string(fs: FileSystemState) -> str:
    """Current path, e.g. '/home/user'. Root is '/'."""
    return format_path(fs.current_path)


def is_explored(fs: FileSystemState) -> bool:
    return path_string(fs) in fs.explored


def visible_entries(fs: FileSystemState) -> Tuple[FileSystemNode, ...]:
    """Children of the current directory, or nothing until it is listed."""
    if not is_explored(fs):
        return ()
    return current_directory(fs).children


def describe_entries(entries: Sequence[FileSystemNode]) -> str:
    """`ls` output: 'd home, - readme.txt' or 'Directory is empty'."""
    if not entries:
        return 'Directory is empty'
    return ', '.join(
        f"{'d' if entry.is_directory else '-'} {entry.name}" for entry in entries
    )


# =============================================================================
# NAVIGATION
# =============================================================================

def change_directory(fs: FileSystemState,
                     target: str) -> Union[FileSystemState, FileSystemError]:
    """
    Move the cursor.

    Lookup checks the raw tree, not the explored set; only listing is gated.
    """
    if not target or target == '/':
        return replace(fs, current_path=())

    if target == '..':
        if not fs.current_path:
            return FileSystemError(AT_ROOT, target)
        return replace(fs, current_path=fs.current_path[:-1])

    if _child_directory(current_directory(fs), target) is None:
        return FileSystemError(NOT_FOUND, target)
    return replace(fs, current_path=fs.current_path + (target,))


def mark_explored(fs: FileSystemState) -> FileSystemState:
    """Record that the current directory has been listed. Idempotent."""
    here = path_string(fs)
    if here in fs.explored:
        return fs
    return replace(fs, explored=fs.explored | {here})


# =============================================================================
# SPAWN-DRIVEN CREATION
# =============================================================================

def _insert(node: FileSystemNode, path: Sequence[str],
            leaf: FileSystemNode) -> FileSystemNode:
    """Return a copy of `node` with `leaf` appended under `path`."""
    if not path:
        return replace(node, children=node.children + (leaf,))

    head, rest = path[0], path[1:]
    children = list(node.children)
    for index, child in enumerate(children):
        if child.is_directory and child.name == head:
            children[index] = _insert(child, rest, leaf)
            return replace(node, children=tuple(children))

    # Missing intermediate directory: create it empty
    created = _insert(make_directory(head), rest, leaf)
    return replace(node, children=node.children + (created,))


def create_entry(fs: FileSystemState, parent_path: Sequence[str], name: str,
                 kind: NodeKind, linked_enemy_id: Optional[str] = None) -> FileSystemState:
    """
    Append a new file or directory under `parent_path`.

    Used by the spawner only. Never removes or replaces existing nodes.
    """
    if kind is NodeKind.DIRECTORY:
        leaf = make_directory(name, (), linked_enemy_id)
    else:
        leaf = make_file(name, linked_enemy_id)
    return replace(fs, root=_insert(fs.root, tuple(parent_path), leaf))


# =============================================================================
# ENEMY LINKS
# =============================================================================

def find_linked_path(fs: FileSystemState, enemy_id: str) -> Optional[Tuple[str, ...]]:
    """
    Depth-first search for the node spawned by `enemy_id`.

    Returns the path segments from the root to that node (inclusive).
    """
    stack: List[Tuple[FileSystemNode, Tuple[str, ...]]] = [(fs.root, ())]
    while stack:
        node, path = stack.pop()
        for child in reversed(node.children):
            child_path = path + (child.name,)
            if child.linked_enemy_id == enemy_id:
                return child_path
            if child.is_directory:
                stack.append((child, child_path))
    return None


def linked_index(fs: FileSystemState) -> Dict[str, Tuple[str, ...]]:
    """Map of enemy id -> node path for every linked node in the tree."""
    index: Dict[str, Tuple[str, ...]] = {}
    stack: List[Tuple[FileSystemNode, Tuple[str, ...]]] = [(fs.root, ())]
    while stack:
        node, path = stack.pop()
        for child in node.children:
            child_path = path + (child.name,)
            if child.linked_enemy_id is not None:
                index.setdefault(child.linked_enemy_id, child_path)
            if child.is_directory:
                stack.append((child, child_path))
    return index


def pool_category(path: Sequence[str]) -> str:
    """Pool category for a directory path, by its last segment."""
    if not path:
        return 'documents'
    return _POOL_ALIASES.get(path[-1].lower(), 'documents')


def file_from_pool(path: Sequence[str], rng) -> str:
    return rng.choice(FILE_POOLS[pool_category(path)])
