from django.db import models


class LojaInfo(models.Model):
    """
    Configurações gerais da loja (registro único, pk=1).
    """
    titulo = models.CharField(max_length=255, blank=True, default='')
    descricao = models.TextField(blank=True, default='')
    email = models.EmailField(blank=True, default='')
    instagram = models.CharField(max_length=255, blank=True, default='')
    facebook = models.CharField(max_length=255, blank=True, default='')
    whatsapp = models.CharField(max_length=30, blank=True, default='')

    class Meta:
        verbose_name = 'Informações da Loja'
        verbose_name_plural = 'Informações da Loja'
        db_table = 'loja_info'

    def __str__(self):
        return self.titulo or 'Loja'

    @classmethod
    def carregar(cls):
        """Retorna o registro único, criando-o vazio na primeira leitura."""
        obj, _ = cls.objects.get_or_create(pk=1)
        return obj


class Cupom(models.Model):
    """
    Cupom de desconto. O código é sempre gravado em maiúsculas.
    """
    codigo = models.CharField(max_length=50, unique=True)
    percentual = models.PositiveSmallIntegerField(help_text='Desconto em porcentagem')
    ativo = models.BooleanField(default=True)
    data_criacao = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Cupom'
        verbose_name_plural = 'Cupons'
        db_table = 'loja_cupom'
        ordering = ['codigo']

    def __str__(self):
        return f"{self.codigo} ({self.percentual}%)"

    def save(self, *args, **kwargs):
        self.codigo = (self.codigo or '').strip().upper()
        super().save(*args, **kwargs)
