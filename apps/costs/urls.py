from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'costs'

# Router for ViewSets
router = DefaultRouter()
router.register(r'definitions', views.CostDefinitionViewSet, basename='cost')

urlpatterns = [
    # Cost definitions
    # GET    /api/costs/definitions/         - List costs (date_from, date_to, type, search)
    # POST   /api/costs/definitions/         - Create cost or recurring series
    # GET    /api/costs/definitions/{id}/    - Get cost
    # PUT    /api/costs/definitions/{id}/    - Update cost
    # PATCH  /api/costs/definitions/{id}/    - Partial update
    # DELETE /api/costs/definitions/{id}/    - Delete cost (?delete_series=true)

    path('operating-hours/', views.operating_hours, name='operating-hours'),
    path('pricing-profile/', views.pricing_profile, name='pricing-profile'),
    path('hourly-cost/', views.hourly_cost, name='hourly-cost'),
    path('analysis/', views.cost_analysis, name='analysis'),

    path('', include(router.urls)),
]
