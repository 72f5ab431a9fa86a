from enum import Enum


class Location(str, Enum):
    """Sites and clouds a server can live in"""

    AZURE = "AZURE"
    AWS = "AWS"
    GCP = "GCP"
    OCI = "OCI"
    HUB = "HUB"
    LOCAL = "LOCAL"


class Ambiente(str, Enum):
    PRD = "PRD"
    NPRD = "NPRD"


class ServerStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class CommandSort(str, Enum):
    """Presentation orderings for the command catalog"""

    NEWEST = "newest"
    OLDEST = "oldest"
    AZ = "az"
    ZA = "za"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ServerSortKey(str, Enum):
    SERVICO = "servico"
    HOSTNAME = "hostname"
    IP_ADDRESS = "ip_address"
    OS = "os"
    LOCATION = "location"
    PROJETO = "projeto"
    AMBIENTE = "ambiente"
    STATUS = "status"
