import typing as t


class HaltInterrupt(KeyboardInterrupt):
    pass


class HaltFlag(t.Protocol):

    def breakpoint(self):
        self.check_continue(True)

    def check_continue(self, raise_ex: bool = True) -> bool:
        if not self._should_continue():
            if raise_ex:
                raise HaltInterrupt()
            return False
        return True

    def _should_continue(self) -> bool:
        raise NotImplementedError()

    @staticmethod
    async def iterate(iterable: t.AsyncIterable, halt_flag=None, raise_ex: bool = True):
        if halt_flag is None:
            async for x in iterable:
                yield x
        else:
            async for x in iterable:
                if not halt_flag.check_continue(raise_ex):
                    break
                yield x

