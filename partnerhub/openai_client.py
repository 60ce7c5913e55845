# ---------- partnerhub/openai_client.py ----------
import logging
import os
from typing import Sequence

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI  # install langchain-openai

from partnerhub.settings import LANGCHAIN_MODEL, OPENAI_API_KEY, TEMPERATURE
from schemas.company import Company

logger = logging.getLogger(__name__)

EMPTY_BOOK_MESSAGE = "Adicione empresas para obter insights da IA."
UNAVAILABLE_MESSAGE = "Não foi possível gerar insights no momento."

# Only set env when a real key is present to avoid TypeError
if OPENAI_API_KEY:
    os.environ["OPENAI_API_KEY"] = OPENAI_API_KEY


def _make_chat_client(model: str, temperature: float | None):
    kwargs = {
        "model": model,
        "callback_manager": None,
        "verbose": False,
    }
    if temperature is not None:
        kwargs["temperature"] = temperature
    try:
        return ChatOpenAI(**kwargs)
    except Exception as exc:
        # No key configured: insights fall back to the unavailable message
        logger.warning("insights client disabled: %s", exc)
        return None


chat_client = _make_chat_client(LANGCHAIN_MODEL, TEMPERATURE)


def build_insights_prompt(companies: Sequence[Company]) -> str:
    summary = ", ".join(
        f"{c.name} (Corretores: {c.broker_count}, Comissão: {c.commission_rate:g}%, Contratado por: {c.hiring_manager})"
        for c in companies
    )
    return (
        "Analise a seguinte lista de imobiliárias parceiras e forneça um resumo estratégico.\n"
        "Considere o tamanho da rede (corretores), as taxas de comissão negociadas (1% a 8%) e os "
        "responsáveis internos pela contratação para identificar padrões de sucesso ou necessidade de "
        "revisão de acordos.\n"
        "Forneça sugestões práticas para maximizar o ROI da rede e engajamento dos parceiros.\n"
        f"Lista: {summary}"
    )


async def generate_insights(companies: Sequence[Company]) -> str:
    if not companies:
        return EMPTY_BOOK_MESSAGE
    if not chat_client:
        return UNAVAILABLE_MESSAGE
    messages = [
        SystemMessage(content="Você é um consultor de parcerias do mercado imobiliário."),
        HumanMessage(content=build_insights_prompt(companies)),
    ]
    try:
        result = await chat_client.agenerate([messages])
    except Exception as exc:
        logger.error("insights generation failed: %s", exc)
        return UNAVAILABLE_MESSAGE
    # The generations structure: List[List[ChatGeneration]]
    return result.generations[0][0].message.content.strip()
