# Publisher: approval workflow, Odoo CMS client, social drafts, notifications
from .notifier import Notifier
from .odoo_client import OdooClient
from .social_media import SocialMediaGenerator
from .workflow import ArticleWorkflow

__all__ = [
    "Notifier",
    "OdooClient",
    "SocialMediaGenerator",
    "ArticleWorkflow",
]
