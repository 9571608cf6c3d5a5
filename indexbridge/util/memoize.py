'''
Created on 18 Oct 2026
'''
import threading

class MemoizedSupplier(object):
    '''
    Wraps a fetcher (any callable without arguments) so that it is evaluated
    at most once. The first successful result is kept and returned by all
    the later calls to get(). A failed evaluation is not kept, the next call
    to get() tries again.
    '''
    def __init__(self, fetcher):
        self._fetcher = fetcher
        self._evaluated = False
        self._value = None
        self._lock = threading.Lock()
        
    def get(self):
        if self._evaluated:
            return self._value
        with self._lock:
            if not self._evaluated:
                self._value = self._fetcher()
                self._evaluated = True
        return self._value
    
    def __call__(self):
        return self.get()
    
    def evaluated(self):
        '''
        Returns True if a value has been obtained from the fetcher
        '''
        return self._evaluated
    

def memoize(fetcher):
    '''
    Convenience function returning a MemoizedSupplier for the fetcher
    '''
    return MemoizedSupplier(fetcher)
