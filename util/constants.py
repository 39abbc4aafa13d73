class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    SEND = V1 + "/send/{key}"
    SEND_WITH_SUFFIX = SEND + "/{suffix:path}"
    ENTRY = V1 + "/store/{entry_type}"
    ENTRY_FOLDER = ENTRY + "/folder"
    TENANTS = V1 + "/tenants"
    TENANT = TENANTS + "/{name}"


class Headers:
    TENANT_ID = "X-Tenant-Id"


# Default page size for folder listings.
LIST_LIMIT = 20
