#import modeli zeby SQLAlchemy zarejestrowal je w Base.metadata

from storefront.data.models.kv_entry import KeyValueEntryModel

__all__ = ["KeyValueEntryModel"]
