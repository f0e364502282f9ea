class StoreError(Exception):
    pass


class UnknownTenantError(StoreError):
    pass


class TenantContextError(StoreError):
    pass


class DocumentNotFoundError(StoreError):
    pass
