# main.py
import json

from ride_match.app.build import build


def run():
    app = build({"name": "demo", "run_id": "demo-1"}, use_logging=False)
    svc = app.service

    # Build road graph
    for a, b, cost in [("A", "B", 5), ("A", "C", 10), ("B", "C", 3), ("C", "D", 4), ("B", "D", 8)]:
        app.world.graph.add_road(a, b, cost)

    for uid, name, role in [
        (101, "Ayesha", "driver"),
        (102, "Bilal", "driver"),
        (201, "Sara", "passenger"),
        (202, "Usman", "passenger"),
        (203, "Hina", "passenger"),
    ]:
        svc.register_user({"userId": uid, "name": name, "role": role})

    # Ride offers
    svc.create_offer(
        {"offerId": 1, "driverId": 101, "start": "A", "end": "D", "departTime": 10, "capacity": 2}
    )
    svc.create_offer(
        {"offerId": 2, "driverId": 102, "start": "A", "end": "C", "departTime": 12, "capacity": 1}
    )
    print("--- offers after creation ---")
    print(json.dumps(svc.list_offers(), indent=2))

    # Ride requests
    for rid, pid, src, dst, lo, hi in [
        (1, 201, "A", "D", 9, 11),
        (2, 202, "A", "D", 10, 12),
        (3, 203, "A", "C", 11, 13),
    ]:
        svc.create_request(
            {
                "requestId": rid,
                "passengerId": pid,
                "from": src,
                "to": dst,
                "earliest": lo,
                "latest": hi,
            }
        )

    print("--- matching ---")
    for i in range(1, 5):
        print(f"match {i}:", json.dumps(svc.match_next()))

    print("--- offers after matching ---")
    print(json.dumps(svc.list_offers(), indent=2))

    print("--- reachable within 15 of the newest offer ---")
    newest = app.world.offers.enumerate()[0]
    print(json.dumps(svc.reachable({"offerId": newest.offer_id, "costBound": 15}), indent=2))

    print("--- top drivers ---")
    print(json.dumps(svc.top_drivers(3), indent=2))


if __name__ == "__main__":
    run()
