# Inbound events (client -> server)
JOIN_ROOM = "join-room"
OFFER = "offer" # also outbound, relayed to the target
ANSWER = "answer" # also outbound
ICE_CANDIDATE = "ice-candidate" # also outbound
SEND_MESSAGE = "send-message"
DISCONNECT = "disconnect" # transport generated, never sent by clients

# Outbound events (server -> client)
EXISTING_USERS = "existing-users" # sender only, list of {id, name}
USER_JOINED = "user-joined" # other members, {userId, userName}
USER_LEFT = "user-left" # remaining members, {userId, userName}
RECEIVE_MESSAGE = "receive-message" # every member incl. sender

RELAY_EVENTS = (OFFER, ANSWER, ICE_CANDIDATE)

# Field carrying the opaque blob for each relay kind
RELAY_PAYLOAD_FIELDS = {
    OFFER: "offer",
    ANSWER: "answer",
    ICE_CANDIDATE: "candidate",
}
