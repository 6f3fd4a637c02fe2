import pytest
from contextlib import ExitStack
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

from backoffice.models.audit import FactorLog
from backoffice.models.factor import Factor, FactorStatus, PaymentMethod, Tag
from backoffice.models.user import ActorRole, User

# Every module that reads the shared remote handle
REMOTE_CONSUMERS = [
    "backoffice.remote.remote",
    "backoffice.api.auth.remote",
    "backoffice.api.factors.remote",
    "backoffice.workflow.executor.remote",
    "backoffice.guardrails.audit_logger.remote",
]

@pytest.fixture
def mock_remote():
    mock = MagicMock()
    mock.factors = AsyncMock()
    mock.factor_logs = AsyncMock()
    mock.users = AsyncMock()
    mock.tags = AsyncMock()
    with ExitStack() as stack:
        for target in REMOTE_CONSUMERS:
            stack.enter_context(patch(target, mock))
        yield mock

@pytest.fixture
def mock_notify():
    with patch("backoffice.workflow.executor.notification_tool") as mock:
        mock.notify_status_change = AsyncMock()
        yield mock

@pytest.fixture
def make_user():
    def _make(role: ActorRole, user_id: str = "42") -> User:
        return User(user_id=user_id, token="tok-123", role=role)
    return _make

@pytest.fixture
def sample_factor():
    return Factor(
        id="f_100",
        name="علی رضایی  ۱۴۰۳/۰۵/۱۲",
        date="14030512",
        customer_user_id="7",
        creator_user_id="42",
        status=FactorStatus.CREATED,
        orash_factor_id="9001",
        payment_method=PaymentMethod.CASH,
        tags=[Tag(id="t1", name="فوری")]
    )

@pytest.fixture
def make_log():
    def _make(status: FactorStatus, minute: int = 0, factor_id: str = "f_100") -> FactorLog:
        return FactorLog(
            id=f"log_{minute}",
            factor_id=factor_id,
            status=status,
            comment="وضعیت فاکتور تغییر کرد",
            created_at=datetime(2024, 8, 2, 10, minute)
        )
    return _make
