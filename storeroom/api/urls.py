from django.urls import path

from storeroom.api import views

app_name = 'storeroom'

urlpatterns = [
    path('stock/', views.stock_list, name='stock_list'),
    path('stock/low/', views.stock_low, name='stock_low'),
    path('stock/movements/', views.stock_movements, name='stock_movements'),
    path('stock/items/<int:item_id>/', views.stock_item_total, name='stock_item_total'),
    path('stock/adjust/', views.stock_adjust, name='stock_adjust'),
    path('stock/transfer/', views.stock_transfer, name='stock_transfer'),
    path('locations/', views.location_list, name='location_list'),

    path('requisitions/', views.requisition_list, name='requisition_list'),
    path('requisitions/<str:requisition_no>/', views.requisition_detail, name='requisition_detail'),
    path('requisitions/<str:requisition_no>/history/', views.requisition_history, name='requisition_history'),
    path('requisitions/<str:requisition_no>/submit/', views.requisition_submit, name='requisition_submit'),
    path('requisitions/<str:requisition_no>/approve/', views.requisition_approve, name='requisition_approve'),
    path('requisitions/<str:requisition_no>/reject/', views.requisition_reject, name='requisition_reject'),
    path('requisitions/<str:requisition_no>/cancel/', views.requisition_cancel, name='requisition_cancel'),
]
