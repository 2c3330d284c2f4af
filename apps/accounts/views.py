from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from .serializers import UserSerializer


@extend_schema(
    responses={200: UserSerializer},
    description="Return the authenticated shop account.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get the current user (the tenant every other endpoint is scoped to)."""
    return Response(UserSerializer(request.user).data)
