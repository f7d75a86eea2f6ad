from dupreaper.core.models import ResolutionStrategy, PruneScope
from dupreaper.core.hasher import ALGORITHMS

STRATEGY_ALIASES = {
    "bucket": ResolutionStrategy.BUCKET,
    "size": ResolutionStrategy.BUCKET,
    "index": ResolutionStrategy.INDEX,
    "digest": ResolutionStrategy.INDEX,
}

STRATEGY_CHOICES = list(STRATEGY_ALIASES.keys())

STRATEGY_HELP_TEXT = (
    "Resolution strategy:\n"
    f"  bucket (size) : {ResolutionStrategy.BUCKET.description}\n"
    f"  index (digest): {ResolutionStrategy.INDEX.description}\n"
    "Default: bucket"
)

PRUNE_ALIASES = {
    "none": PruneScope.NONE,
    "delete": PruneScope.DELETE,
    "all": PruneScope.ALL,
}

PRUNE_CHOICES = list(PRUNE_ALIASES.keys())

PRUNE_HELP_TEXT = (
    "Remove directories left empty after deletion:\n"
    "  none   : Never remove directories (default)\n"
    "  delete : Sweep the delete directories only\n"
    "  all    : Sweep delete directories, then keep directories"
)

ALGORITHM_CHOICES = list(ALGORITHMS.keys())

EPILOG_TEXT = """
Examples:
  Preview which backup files already exist in Photos (nothing is deleted)
  %(prog)s --keep ~/Photos --delete /mnt/backup --dry-run

  Delete redundant copies from two folders, asking for confirmation
  %(prog)s -k ~/Photos -d /mnt/backup ~/Downloads

  Same as above, move files to trash and remove emptied folders (for scripts)
  %(prog)s -k ~/Photos -d /mnt/backup ~/Downloads --trash --prune delete --force

  Only deduplicate the delete folder against itself, images larger than 100KB
  %(prog)s -d ~/Downloads -x .jpg .png -m 100K --force

  Read settings from a TOML file, override one on the command line
  %(prog)s --config cleanup.toml --dry-run
"""
