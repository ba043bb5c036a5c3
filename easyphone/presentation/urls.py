"""
Define as rotas de API REST da loja: catálogo, carrinho, frete, checkout e painel.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views, views_admin

# Configuração do Router para ViewSets (API REST)
router = DefaultRouter()
router.register(r'produtos', views.ProdutoViewSet, basename='produto')


urlpatterns = [
    # ====================================================================
    # 1. ROTAS DA LOJA
    # ====================================================================
    path('', include(router.urls)),  # /api/produtos/
    path('carrinho/', views.CarrinhoAPIView.as_view(), name='api_carrinho'),
    path('frete/', views.FreteAPIView.as_view(), name='api_frete'),
    path('checkout/', views.CheckoutAPIView.as_view(), name='api_checkout'),

    # ====================================================================
    # 2. ROTAS DO PAINEL
    # ====================================================================
    path('dashboard/pedidos/', views_admin.PedidosDashboardAPIView.as_view(), name='dashboard_pedidos'),
    path(
        'dashboard/pedidos/<str:pk>/status/',
        views_admin.AtualizarStatusPedidoAPIView.as_view(),
        name='dashboard_atualizar_status',
    ),
    path('dashboard/cupons/', views_admin.CuponsAPIView.as_view(), name='dashboard_cupons'),
    path('dashboard/cupons/<str:pk>/', views_admin.CupomDetalheAPIView.as_view(), name='dashboard_cupom_detalhe'),
    path('dashboard/loja/', views_admin.LojaInfoAPIView.as_view(), name='dashboard_loja'),
]
