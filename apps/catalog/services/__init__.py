from .catalog_sync import CatalogSyncService
from .catalog_writer import CatalogWriter, WriteResult
from .catalog_projection import project_options, project_product
from .media_normalizer import normalize_media, diff_media
from .option_diff import diff_option_tree, ReconciliationPlan

__all__ = [
    'CatalogSyncService',
    'CatalogWriter',
    'WriteResult',
    'project_options',
    'project_product',
    'normalize_media',
    'diff_media',
    'diff_option_tree',
    'ReconciliationPlan',
]
