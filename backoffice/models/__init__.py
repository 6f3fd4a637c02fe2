from backoffice.models.base import ApiModel
from backoffice.models.factor import Factor, FactorCreate, FactorUpdate, FactorFilter, FactorPage, FactorStatus, PaymentMethod, StatusBadge, Tag
from backoffice.models.audit import FactorLog
from backoffice.models.user import ActorRole, User
