"""
Application layer use cases.
Business logic for the freelance marketplace.
"""

from .base_use_case import *
from .profile_use_cases import *
from .application_use_cases import *
from .post_use_cases import *
from .marketplace_use_cases import *
from .review_use_cases import *
from .messaging_use_cases import *
from .admin_use_cases import *

__all__ = [
    # Base Use Cases
    "BaseUseCase",
    "QueryUseCase", 
    "CommandUseCase",
    "PaginatedQueryUseCase",
    "CreateUseCase",
    "UpdateUseCase", 
    "DeleteUseCase",
    "AuthorizedUseCase",
    "UseCaseResult",
    
    # Profile Use Cases
    "EnsureProfileUseCase",
    "GetMyProfileUseCase",
    "UpdateMyProfileUseCase",
    "UploadAvatarUseCase",
    "GetPublicProfileUseCase",
    "DeleteMyAccountUseCase",
    
    # Application Use Cases
    "ListQuestionsUseCase",
    "CreateQuestionUseCase",
    "UpdateQuestionUseCase",
    "DeleteQuestionUseCase",
    "GetMyApplicationUseCase",
    "SubmitApplicationUseCase",
    "DeleteMyApplicationUseCase",
    "ReviewApplicationUseCase",
    "ListApplicationsUseCase",
    
    # Post Use Cases
    "CreatePostUseCase",
    "UpdatePostUseCase",
    "GetMyPostUseCase",
    "PublishPostUseCase",
    "UnpublishPostUseCase",
    "ArchivePostUseCase",
    "DeletePostUseCase",
    "ListMyPostsUseCase",
    "ReorderSectionsUseCase",
    "UploadPostImageUseCase",
    
    # Marketplace Use Cases
    "BrowsePostsUseCase",
    "GetPostDetailsUseCase",
    "ListCategoriesUseCase",
    "TrendingFreelancersUseCase",
    
    # Review Use Cases
    "SubmitReviewUseCase",
    "DeleteMyReviewUseCase",
    "ListReviewsUseCase",
    
    # Messaging Use Cases
    "GetOrCreateConversationUseCase",
    "StartConversationWithMessageUseCase",
    "ListConversationsUseCase",
    "GetMessagesUseCase",
    "SendMessageUseCase",
    "MarkReadUseCase",
    
    # Admin Use Cases
    "ListUsersUseCase",
    "SetAccountStatusUseCase",
    "CheckDatabaseUseCase",
]
