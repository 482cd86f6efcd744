from features.chat.telegram.handlers.update_handler import HandlerAction, UpdateHandler
from features.chat.telegram.model.update import Update


class CallbackQueryHandler(UpdateHandler):

    __data: str
    __prefix_match: bool

    def __init__(
        self,
        data: str,
        action: HandlerAction | None = None,
        prefix_match: bool = False,
        name: str | None = None,
    ):
        super().__init__(action, name)
        self.__data = data
        self.__prefix_match = prefix_match

    def describe(self) -> str:
        return f"CallbackQueryHandler({self.__data}{'*' if self.__prefix_match else ''})"

    def supports(self, update: Update) -> bool:
        data = self.__query_data(update)
        if data is None:
            return False
        if self.__prefix_match:
            return data.startswith(self.__data)
        return data == self.__data

    def payload(self, update: Update) -> str:
        """The part of the callback data after the prefix in prefix mode, the whole data otherwise."""
        data = self.__query_data(update) or ""
        if self.__prefix_match and data.startswith(self.__data):
            return data[len(self.__data):]
        return data

    @staticmethod
    def __query_data(update: Update) -> str | None:
        if not update.callback_query:
            return None
        return update.callback_query.data
