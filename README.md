# corokit

Building blocks for running coroutines without an event loop. Coroutines
are stepped by hand through `CoroutineHandle`, suspended with `suspend()`,
and resumed by whoever holds their handle: a semaphore, a `when_all`
group or a thread pool worker.

## Core modules

- `corokit.sync_wait`
  - `sync_wait(awaitable)` runs an awaitable and blocks the calling thread
    until it finishes, returning its value or raising its exception.
  - `suspend(register)` suspends the awaiting coroutine and passes its
    `CoroutineHandle` to `register`; if `register` returns `False` the
    coroutine carries on at once.
  - `CoroutineHandle` has `resume()`, `done()` and `result()`.
  - `SyncWaitEvent` is a thread-level flag with `set()`, `reset()`,
    `wait()` and `is_set()`.
- `corokit.generator`
  - The `generator` decorator turns a generator function into one that
    returns a single-pass `Generator`. The body does not start until the
    first value is requested, and it may not be an `async` function.
- `corokit.semaphore`
  - `Semaphore(least_max_value, starting_value=None)`: `await acquire()`
    gives an `AcquireResult` (`ACQUIRED` or `SEMAPHORE_STOPPED`);
    `release()` hands a unit straight to a waiter when there is one;
    `try_acquire()` never waits; `value()` reports the free units.
    Waiters are resumed last in, first out. `notify_waiters()` stops the
    semaphore and resumes every waiter with `SEMAPHORE_STOPPED`.
- `corokit.when_all`
  - `when_all(*awaitables)` gives an awaitable whose result is a tuple of
    `WhenAllTask`; `when_all_range(iterable)` gives a list. Each task's
    `return_value()` returns the value or re-raises the exception.
  - `WhenAllLatch` and `WhenAllReadyAwaitable` are the pieces these are
    built from.
- `corokit.thread_pool`
  - `ThreadPool(ThreadPoolOptions(thread_count=..., on_thread_start=...,
    on_thread_stop=...))`. `thread_count` defaults to the CPU count; the
    start and stop callbacks receive the worker index.
  - `await pool.schedule()` moves the awaiting coroutine onto a worker;
    `pool.schedule(func, *args)` is a coroutine that calls `func(*args)` on
    a worker and returns its result. Queued coroutines are resumed in FIFO
    order.
  - `resume(handle)` queues an already suspended coroutine; `size()`,
    `empty()` and `thread_count()` report on the pool.
  - `shutdown()` (also run on leaving a `with` block) lets the workers
    drain the queue and joins them; scheduling afterwards raises
    `ThreadPoolShutdownError`.

## Networking helpers (`corokit.net`)

- `ip_address`: `Domain` (`IPV4`, `IPV6`) and `IpAddress`, which holds the
  address bytes, parses with `IpAddress.from_string(text, domain)` and
  formats with `to_string()`. Parse failures and over-long byte strings
  raise `ValueError`.
- `hostname`: `Hostname`, an ordered, frozen wrapper around a host name.
- `status`: `ConnectStatus`, `RecvStatus`, `SendStatus` and
  `SslHandshakeStatus`, plus `recv_status_from_errno` and
  `send_status_from_errno`, which raise `ValueError` for an errno with no
  status.
- `socket`: `Socket` owns an OS socket (`is_valid`, `blocking`, `shutdown`,
  `close`, `native_handle`, `detach`, usable with `with`).
  `make_socket(SocketOptions(domain, type, blocking))` creates one, and
  `make_accept_socket(opts, address, port, backlog=128)` binds it with
  address reuse and, for TCP, listens. Failures raise `RuntimeError`.
- `ssl_context`: `SslContext()` builds a client TLS context that does not
  verify peers. `SslContext(certificate, certificate_type, private_key,
  private_key_type)` builds a server context from PEM or ASN.1
  (`SslFileType`) files and raises `RuntimeError` if a file cannot be
  loaded or the key does not match the certificate. `native_handle()`
  returns the `ssl.SSLContext`.

## Example

```python
from corokit.sync_wait import sync_wait
from corokit.thread_pool import ThreadPool, ThreadPoolOptions
from corokit.when_all import when_all

with ThreadPool(ThreadPoolOptions(thread_count=1)) as pool:
    async def work():
        await pool.schedule()
        return 50

    tasks = sync_wait(when_all(work(), work(), work()))
    print(sum(t.return_value() for t in tasks))  # 150
```

## What it does not do

There is no I/O scheduler or readiness polling. The networking helpers
create, bind and describe sockets and TLS contexts, but the package has no
TCP client or server, no UDP peer and no DNS resolver: it does not connect,
accept, send, receive or perform TLS handshakes. Beyond the semaphore there
are no events, latches, mutexes or ring buffers.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```