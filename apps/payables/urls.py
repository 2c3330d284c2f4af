from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'payables'

# Router for ViewSets
router = SimpleRouter()
router.register(r'payments', views.PaymentRecordViewSet, basename='payment')

urlpatterns = [
    # GET    /api/payables/                  - Reconciled month (month, year, search, status)
    # POST   /api/payables/register/         - Register a payment
    # GET    /api/payables/alerts/           - Due today and overdue
    # GET    /api/payables/payments/         - Stored payment history
    # GET    /api/payables/payments/{id}/    - Stored payment
    path('', views.payables_list, name='payables-list'),
    path('register/', views.register_payment_view, name='register-payment'),
    path('alerts/', views.due_alerts, name='due-alerts'),

    path('', include(router.urls)),
]
