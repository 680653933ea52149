from django.urls import path

from . import views

urlpatterns = [
    path('', views.index, name='index'),
    path('admin-mode/', views.toggle_admin, name='toggle_admin'),
    path('import/', views.import_file, name='import_file'),
    path('import/confirm/', views.import_confirm, name='import_confirm'),
    path('import/cancel/', views.import_cancel, name='import_cancel'),
    path('quotes/add/', views.quote_add, name='quote_add'),
    path('poster/', views.poster, name='poster'),
    path('api/quotes/', views.api_quotes, name='api_quotes'),
]
