"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from lms.infrastructure or lms.api.
"""

from lms.application.interfaces.repositories import (
    ICourseRepository,
    ILayoutRepository,
    INotificationRepository,
    IOrderRepository,
    IUserRepository,
)
from lms.application.interfaces.services import (
    ICacheService,
    IImageStorage,
    IMailer,
    IOAuthProvider,
    IPasswordHasher,
    ITokenService,
    IUnitOfWork,
)

__all__ = [
    "ICacheService",
    "ICourseRepository",
    "IImageStorage",
    "ILayoutRepository",
    "IMailer",
    "INotificationRepository",
    "IOAuthProvider",
    "IOrderRepository",
    "IPasswordHasher",
    "ITokenService",
    "IUnitOfWork",
    "IUserRepository",
]
