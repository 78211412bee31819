"""Chat chain: answers free-text questions about the current graph."""

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

GRAPH_CONTEXT_PROMPT = """{system_message}

KNOWLEDGE GRAPH
Nodes:
{nodes}

Relationships:
{links}"""


def create_chat_chain(chat_model: BaseChatModel):
    """
    Create LCEL chain for graph analysis chat.

    Args:
        chat_model: LangChain chat model to use

    Returns:
        Runnable chain that takes {"system_message", "nodes", "links",
        "history", "question"} and returns the answer string
    """
    prompt = ChatPromptTemplate.from_messages(
        [
            ("system", GRAPH_CONTEXT_PROMPT),
            MessagesPlaceholder("history"),
            ("human", "{question}"),
        ]
    )

    return prompt | chat_model | StrOutputParser()
