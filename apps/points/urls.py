from django.urls import path
from . import views

app_name = 'points'

urlpatterns = [
    path('balance/', views.points_balance, name='balance'),
    path('history/', views.points_history, name='history'),
    path('adjust/', views.points_adjust, name='adjust'),
]
