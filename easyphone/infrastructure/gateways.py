import logging

import requests
from django.conf import settings

# Importa o Protocol e as exceções da camada Core
from easyphone.core.ports import IFreteGateway
from easyphone.core.exceptions import FreteIndisponivelError, FreteRespostaInvalidaError

logger = logging.getLogger(__name__)


# ====================================================================
# GATEWAYS: Implementações concretas que se comunicam com APIs externas.
# ====================================================================

# Perfil fixo de pacote usado em todas as cotações (cm / kg)
PACOTE_PADRAO = {
    "height": 2,
    "width": 11,
    "length": 16,
    "weight": 0.3,
}

OPCOES_PADRAO = {
    "own_hand": False,
    "receipt": False,
    "insurance_value": 0,
    "use_insurance_value": False,
}


class SuperFreteGateway(IFreteGateway):
    """
    Gateway para a calculadora de frete da SuperFrete.
    Implementa a interface IFreteGateway do Core. Não faz novas tentativas.
    """

    def __init__(self, url=None, token=None, cep_origem=None, servicos=None, timeout=None):
        # Padrões vindos do settings (python-decouple lê o .env lá)
        self.url = url or settings.SUPERFRETE_URL
        self.token = token if token is not None else settings.SUPERFRETE_TOKEN
        self.cep_origem = cep_origem or settings.FRETE_CEP_ORIGEM
        self.servicos = servicos or settings.FRETE_SERVICOS
        self.timeout = timeout or settings.FRETE_TIMEOUT

        if not self.token:
            logger.warning("SUPERFRETE_TOKEN não configurado. As cotações de frete vão falhar.")

    def _montar_payload(self, cep_destino: str) -> dict:
        return {
            "from": {"postal_code": self.cep_origem},
            "to": {"postal_code": cep_destino},
            "services": self.servicos,
            "options": dict(OPCOES_PADRAO),
            "package": dict(PACOTE_PADRAO),
        }

    def cotar(self, cep_destino: str):
        """Envia a cotação e devolve o JSON decodificado, sem normalizar."""
        headers = {
            "Content-Type": "application/json",
            "x-access-token": self.token,
        }

        try:
            response = requests.post(
                self.url, json=self._montar_payload(cep_destino), headers=headers, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error("Erro de conexão com a SuperFrete: %s", e)
            raise FreteIndisponivelError(detalhe=str(e))

        logger.debug("Resposta da SuperFrete (%s): %s", response.status_code, response.text)

        if not response.ok:
            try:
                detalhe = response.json()
            except ValueError:
                detalhe = response.text
            logger.error("SuperFrete respondeu com status %s.", response.status_code)
            raise FreteIndisponivelError(status_code=response.status_code, detalhe=detalhe)

        try:
            return response.json()
        except ValueError:
            raise FreteRespostaInvalidaError(bruto=response.text, message="Resposta não é JSON")
