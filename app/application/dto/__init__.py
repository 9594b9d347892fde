"""
Application layer DTOs.
Data Transfer Objects for API requests and responses.
"""

from .base_dto import *
from .post_dto import *
from .profile_dto import *
from .application_dto import *
from .review_dto import *
from .marketplace_dto import *
from .messaging_dto import *
from .admin_dto import *

__all__ = [
    # Base DTOs
    "BaseDTO",
    "RequestDTO", 
    "ResponseDTO",
    "CreateRequestDTO",
    "UpdateRequestDTO",
    "ListRequestDTO",
    "ListResponseDTO",
    "StatusResponseDTO",
    "UploadRequestDTO",
    
    # Post DTOs
    "PostSectionDTO",
    "PackageDTO",
    "CreatePostRequestDTO",
    "UpdatePostRequestDTO",
    "ListMyPostsRequestDTO",
    "ReorderSectionsRequestDTO",
    "UploadPostImageRequestDTO",
    "PostResponseDTO",
    "PostSummaryResponseDTO",
    
    # Profile DTOs
    "ProfileClaimsDTO",
    "UpdateProfileRequestDTO",
    "ProfileResponseDTO",
    "ProfileSummaryResponseDTO",
    "PublicProfileResponseDTO",
    
    # Application DTOs
    "CreateQuestionRequestDTO",
    "UpdateQuestionRequestDTO",
    "SubmitApplicationRequestDTO",
    "ReviewApplicationRequestDTO",
    "ListApplicationsRequestDTO",
    "QuestionResponseDTO",
    "AnswerResponseDTO",
    "ApplicationResponseDTO",
    
    # Review DTOs
    "SubmitReviewRequestDTO",
    "ReviewResponseDTO",
    
    # Marketplace DTOs
    "BrowsePostsRequestDTO",
    "BrowsePostsResponseDTO",
    "PostDetailsResponseDTO",
    "CategoriesResponseDTO",
    "TrendingFreelancerResponseDTO",
    
    # Messaging DTOs
    "OpenConversationRequestDTO",
    "StartConversationRequestDTO",
    "SendMessageRequestDTO",
    "ListConversationsRequestDTO",
    "ChatMessageResponseDTO",
    "ConversationResponseDTO",
    "ConversationMessagesResponseDTO",
    "StartConversationResponseDTO",
    "MarkReadResponseDTO",
    
    # Admin DTOs
    "ListUsersRequestDTO",
    "SetAccountStatusRequestDTO",
    "AdminUserResponseDTO",
    "DatabaseCheckResponseDTO",
]
